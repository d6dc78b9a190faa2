"""
Flask application for the site's server-side endpoints.

    GET  /image.png   verification image; sets the session digest and the
                      `verify` cookie
    POST /process     contact form
"""

import logging
import random
import secrets
from typing import Optional

from flask import Flask, Response, request, session

from common.config import DEFAULT_CONFIG, Config

from .captcha import generate_token, pick_background, render_token
from .contact import handle_contact
from .mail import Mailer, SmtpMailer

logger = logging.getLogger(__name__)

VERIFY_KEY = "verify"


def create_app(
    config: Config = DEFAULT_CONFIG,
    mailer: Optional[Mailer] = None,
    rng: Optional[random.Random] = None
) -> Flask:
    """
    Build the application.

    Args:
        config: Site configuration
        mailer: Mail transport (SMTP from config.mail if None)
        rng: Random source for verification tokens
    """
    app = Flask(__name__)
    app.secret_key = config.secret_key or secrets.token_hex(32)
    if config.secret_key is None:
        logger.warning("No secret_key configured, sessions reset on restart")

    mailer = mailer or SmtpMailer(config.mail)
    rng = rng or random.Random()
    captcha = config.captcha

    @app.route("/image.png")
    def verification_image():
        token, digest = generate_token(captcha.token_length, rng)
        session[VERIFY_KEY] = digest

        background = pick_background(captcha.backgrounds, rng)
        png = render_token(token, background, captcha.size, captcha.text_colour)

        response = Response(png, mimetype="image/png")
        response.headers["Cache-Control"] = "no-store"
        response.set_cookie(VERIFY_KEY, digest, max_age=captcha.cookie_max_age, path="/")
        return response

    @app.route("/process", methods=["POST"])
    def process():
        expected = session.get(VERIFY_KEY) or request.cookies.get(VERIFY_KEY)
        body = handle_contact(
            request.form,
            expected,
            mailer,
            config.mail,
            remote_addr=request.remote_addr or "",
        )
        return Response(body, mimetype="text/html")

    return app
