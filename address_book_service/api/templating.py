"""Jinja2 environment and handler outcome rendering."""

from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import Request, Response
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates
from jinja2 import ChoiceLoader, DictLoader, Environment, FileSystemLoader, select_autoescape

from address_book_service.models.schemas import HandlerOutcome, Redirect

# Templates that live in code rather than in the templates directory
INLINE_TEMPLATES = {
    "my_inline_template": "<h1>This is an inline template</h1>\n",
    "show_params": (
        "<p>{{ comment }}</p>\n"
        "<p>params: {{ params }}</p>\n"
        '<p><a href="/route_examples">Back</a></p>\n'
    ),
}


def build_templates(templates_dir: Path) -> Jinja2Templates:
    """Create the template renderer, file templates first, then inline ones."""
    env = Environment(
        loader=ChoiceLoader([
            FileSystemLoader(str(templates_dir)),
            DictLoader(INLINE_TEMPLATES),
        ]),
        autoescape=select_autoescape(default=True, default_for_string=True),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    return Jinja2Templates(env=env)


def render(request: Request, name: str, context: Optional[Dict[str, Any]] = None,
           status_code: int = 200) -> Response:
    """Render template ``name`` with the session CSRF token in scope."""
    templates: Jinja2Templates = request.app.state.templates
    data = {"csrf_token": request.session.get("csrf")}
    data.update(context or {})
    return templates.TemplateResponse(request, name, data, status_code=status_code)


def respond(request: Request, outcome: HandlerOutcome) -> Response:
    """Turn a handler outcome into an HTTP response."""
    if isinstance(outcome, Redirect):
        return RedirectResponse(outcome.target, status_code=303)
    return render(request, outcome.name, outcome.data)
