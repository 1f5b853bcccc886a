from .echo import EchoPlugin

BUILTIN_PLUGINS = {
    "builtin.echo": EchoPlugin,
}

__all__ = ["BUILTIN_PLUGINS", "EchoPlugin"]
