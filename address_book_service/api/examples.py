"""Routing examples: parameters, splats, patterns, negotiation, CSRF, upload."""

import logging
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, File, Form, Request, UploadFile
from fastapi.responses import JSONResponse, PlainTextResponse, RedirectResponse
from starlette.convertors import Convertor, register_url_convertor

from address_book_service.api.middleware import verify_csrf_token
from address_book_service.api.templating import render

logger = logging.getLogger(__name__)

router = APIRouter(tags=["examples"])


class WordConvertor(Convertor):
    """Path segment made of lowercase letters only."""

    regex = "[a-z]+"

    def convert(self, value: str) -> str:
        return value

    def to_string(self, value: str) -> str:
        return value


register_url_convertor("word", WordConvertor())


def show_params(request: Request, comment: str):
    """Render the inline ``show_params`` template for the current request."""
    params = dict(request.query_params)
    params.update(request.path_params)
    return render(request, "show_params", {"comment": comment, "params": params})


# Simple responses and templates

@router.get("/")
async def home(request: Request):
    return render(request, "home.html")


@router.get("/hello", response_class=PlainTextResponse)
async def hello():
    return "Hello!"


@router.get("/template_parameter")
async def template_parameter(request: Request):
    """Pass a value from the handler into a template."""
    some_value = "Got this from the handler"
    return render(request, "template_parameter.html", {"some_value": some_value})


@router.get("/inline_template")
async def inline_template(request: Request):
    return render(request, "my_inline_template")


# Handlers, routes and parameters

@router.get("/route_examples")
async def route_examples(request: Request):
    return render(request, "route_examples.html")


@router.get("/search")
async def search(request: Request, q: Optional[str] = None):
    return show_params(request, f"You asked for '{q or ''}'")


@router.get("/things/{id}")
async def things(request: Request, id: str):
    return show_params(request, f"You asked for thing number '{id}'")


@router.get("/objects/{object_id}")
async def objects(request: Request, object_id: str):
    return show_params(request, f"You asked for object number '{object_id}'")


@router.get("/the/{first:path}/of/{second:path}")
async def splats(request: Request, first: str, second: str):
    return show_params(request, f"You asked for 'the {first} of {second}'")


@router.get("/conditions")
@router.get("/conditions.{format}")
async def conditions(request: Request, format: str = "html"):
    """Optional format suffix, ``html`` when absent."""
    return show_params(request, f"format: {format}")


@router.get("/words/{word:word}")
async def words(request: Request, word: str):
    return show_params(request, f"word: {word}")


# POST: protecting from CSRF attacks

@router.get("/username")
async def username_form(request: Request):
    return render(request, "username.html", {"username": "myuser"})


@router.post("/username", response_class=PlainTextResponse)
async def change_username(
    request: Request,
    username: str = Form(default=""),
    authenticity_token: str = Form(default="")
):
    """Accept the new username only with a valid CSRF token."""
    verify_csrf_token(request, authenticity_token)
    return f"Your new username is '{username}'"


# POST: uploading files

@router.get("/photos")
async def photo_form(request: Request):
    return render(request, "photo_upload.html")


@router.post("/photos")
async def upload_photo(request: Request, photo: Optional[UploadFile] = File(default=None)):
    """Save an uploaded file into the upload directory."""
    if photo is None or not photo.filename:
        return RedirectResponse("/photos", status_code=303)

    upload_dir = Path(request.app.state.settings.upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)

    # Only the base name is trusted, never a client-supplied directory
    target = upload_dir / Path(photo.filename).name
    target.write_bytes(await photo.read())

    logger.info(
        "Photo saved",
        extra={"upload_filename": target.name, "size": target.stat().st_size, "operation": "upload"}
    )
    return PlainTextResponse("OK, photo saved")


# Route conditions

@router.get("/provides")
async def provides(request: Request):
    """Answer JSON only to clients that ask for it."""
    if "application/json" in request.headers.get("accept", ""):
        return JSONResponse({"result": "You asked for JSON"})
    return PlainTextResponse("This is the default handler")
