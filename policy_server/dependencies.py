"""FastAPI dependency getters for the components built in ``create_app``"""
from fastapi import Request

from .services.admin import AdminService
from .services.composer import PolicyComposer
from .services.signer import EnvelopeSigner


def get_composer(request: Request) -> PolicyComposer:
    return request.app.state.composer


def get_signer(request: Request) -> EnvelopeSigner:
    return request.app.state.signer


def get_admin_service(request: Request) -> AdminService:
    return request.app.state.admin
