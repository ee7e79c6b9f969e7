from .command import create_app

__all__ = ["create_app"]
