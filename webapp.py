#!/usr/bin/env python3
from __future__ import annotations

from pathlib import Path
from typing import Optional

from flask import Flask, Response, render_template_string, request

from config_loader import RenderConfig, load_config_or_default
from event_reader import parse_events_document
from event_to_html import render_html

BASE_DIR = Path.cwd()
CONFIG_PATH = BASE_DIR / "config.yml"

FORM_MIMETYPES = {"application/x-www-form-urlencoded", "multipart/form-data"}

SAMPLE_EVENTS = """\
- start: {header: 1}
- text: hello
- end: {header: 1}
- start: list
- start: item
- text: alpha
- end: item
- start: item
- text: beta
- end: item
- end: list
"""


LAYOUT_TEMPLATE = """
<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>{{ page_title }}</title>
  <meta name="viewport" content="width=device-width, initial-scale=1">
</head>
<body>
  <main class="content">
    <h1>Event Preview</h1>
    <form method="post" action="/render">
      <textarea name="events" rows="20" cols="80">{{ sample }}</textarea>
      <p><button type="submit">Render</button></p>
    </form>
  </main>
</body>
</html>
"""


def create_app(cfg: Optional[RenderConfig] = None) -> Flask:
    """
    Build the preview app. Without a config, config.yml in the working
    directory is used when present.
    """
    app = Flask(__name__)
    app.config["RENDER_CONFIG"] = cfg if cfg is not None else load_config_or_default(CONFIG_PATH)

    @app.route("/")
    def index():
        return render_template_string(
            LAYOUT_TEMPLATE,
            page_title="Event Preview",
            sample=SAMPLE_EVENTS,
        )

    @app.route("/render", methods=["POST"])
    def render():
        # cache the raw body first; form parsing would otherwise consume it
        source = request.get_data(cache=True, as_text=True)
        if request.mimetype in FORM_MIMETYPES and "events" in request.form:
            # form field from the index page
            source = request.form["events"]

        try:
            html_out = render_html(
                parse_events_document(source),
                cfg=app.config["RENDER_CONFIG"],
            )
        except ValueError as e:
            return Response(f"Invalid event stream: {e}\n", status=400, mimetype="text/plain")

        return Response(html_out, mimetype="text/html")

    return app


if __name__ == "__main__":
    # Run in dev mode
    create_app().run(debug=False)
