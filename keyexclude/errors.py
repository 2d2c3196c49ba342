class ParseError(ValueError):
    """A keys or data line that is not a 64-bit integer."""
    def __init__(self, line, path=None):
        self.line = line
        self.path = path
        where = (' in %s' % path) if path else ''
        super().__init__('not an integer%s: %r' % (where, line))


class ConfigurationError(ValueError):
    pass


class SwapError(OSError):
    """Delete or rename of a filtered result failed.

    For multi-file rewrites, swapped lists the files already replaced and
    pending the ones still holding their original content.
    """
    def __init__(self, message, path, swapped=None, pending=None):
        self.path = path
        self.swapped = list(swapped or [])
        self.pending = list(pending or [])
        super().__init__('%s: %s' % (message, path))
