from .dev import router as dev_router

__all__ = [
    "dev_router",
]
