from fastapi import APIRouter, Form, Request, Response, status
from fastapi.responses import PlainTextResponse

from core.auth import AUTH_SESSION_KEY, verify_password

router = APIRouter()


@router.post("/login")
async def login(request: Request, password: str = Form("")):
    settings = request.app.state.settings
    if not verify_password(password, settings.login_password_hash):
        return PlainTextResponse("You shall not pass!", status_code=status.HTTP_401_UNAUTHORIZED)

    request.session[AUTH_SESSION_KEY] = True
    return Response(status_code=status.HTTP_200_OK, headers={"HX-Redirect": "/inventory"})


@router.post("/logout")
async def logout(request: Request):
    request.session.clear()
    return Response(status_code=status.HTTP_200_OK, headers={"HX-Redirect": "/login"})
