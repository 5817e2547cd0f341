from innkeeper.models.guest.guest import Guest

__all__ = ["Guest"]
