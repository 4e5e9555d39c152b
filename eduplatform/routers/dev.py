# eduplatform/routers/dev.py
import logging

from fastapi import APIRouter, Depends
from starlette.concurrency import run_in_threadpool

from eduplatform.core.config import settings
from eduplatform.core.password_reset import new_password_reset_code
from eduplatform.schemas import PasswordResetMailIn, PasswordResetMailOut
from eduplatform.services.mailer import HttpMailer, get_mailer

router = APIRouter(prefix="/debug", tags=["dev"])
log = logging.getLogger("eduplatform.dev")

@router.get("/config")
def debug_config(mailer: HttpMailer = Depends(get_mailer)):
    # safe subset only (no DATABASE_URL, no relay URL)
    return {
        "APP_NAME": settings.APP_NAME,
        "PASSWORD_RESET_CODE_MINUTES": settings.PASSWORD_RESET_CODE_MINUTES,
        "LOG_LEVEL": settings.LOG_LEVEL,
        "email_configured": mailer.configured,
    }

@router.post("/mail/password-reset", response_model=PasswordResetMailOut)
async def debug_send_password_reset(
    payload: PasswordResetMailIn,
    mailer: HttpMailer = Depends(get_mailer),
):
    code = new_password_reset_code()
    # the relay call blocks for up to the configured timeouts
    delivered = await run_in_threadpool(
        mailer.send_password_reset_code,
        to_email=str(payload.email),
        code=code,
        user_name=payload.name,
    )
    log.info("debug password reset mail", extra={"delivered": delivered})
    return PasswordResetMailOut(delivered=delivered)
