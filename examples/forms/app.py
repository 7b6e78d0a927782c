"""Forms — a contact form that renders a thank-you page on POST.

Any method other than POST shows the empty form. A POST reads the
``email``, ``subject`` and ``message`` fields (missing fields are empty
strings), logs them, and shows the success message instead of the form.

Demonstrates:
- ``methods=["*"]`` to serve every HTTP method from one handler
- ``Request.form_value()`` for lenient single-field access
- ``template=`` so a missing template stops the app at startup

Run:
    python app.py
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from perch import App, AppConfig, Request, Template

TEMPLATES_DIR = Path(__file__).parent / "templates"

logger = logging.getLogger("perch.app")

app = App(AppConfig(host="0.0.0.0", port=80, template_dir=TEMPLATES_DIR))


@dataclass(frozen=True, slots=True)
class ContactDetails:
    email: str
    subject: str
    message: str


@app.route("/", methods=["*"], template="forms.html")
async def contact(request: Request):
    if request.method != "POST":
        return Template("forms.html", success=False)

    details = ContactDetails(
        email=await request.form_value("email"),
        subject=await request.form_value("subject"),
        message=await request.form_value("message"),
    )
    # Nothing is stored; the submission only reaches the log.
    logger.debug("Contact form submitted: %r", details)

    return Template("forms.html", success=True)


if __name__ == "__main__":
    app.run()
