import inspect


class empty:
    def __bool__(self):
        return False


SERDE_FLAGS_ATTR = "__serde_flags__"
VAR_POSITIONAL = inspect.Parameter.VAR_POSITIONAL
VAR_KEYWORD = inspect.Parameter.VAR_KEYWORD
VAR_KINDS = {VAR_POSITIONAL, VAR_KEYWORD}
NULLABLES = (None, Ellipsis, type(None), type(Ellipsis))
