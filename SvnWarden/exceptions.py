class StructureError(Exception):
    """
    Base class for structure check failures. Carries the reason and, once
    known, the path that was being checked.
    """
    def __init__(self, reason, path=None):
        super(StructureError, self).__init__(reason)
        self.reason = reason
        self.path = path

    def __str__(self):
        if self.path is None:
            return self.reason
        return "%s: %s" % (self.reason, self.path)


class StructureSyntaxError(StructureError):
    "The structure spec itself is malformed"

    def __init__(self, reason, path=None):
        if not reason.startswith("syntax error: "):
            reason = "syntax error: %s" % reason
        super(StructureSyntaxError, self).__init__(reason, path)


class StructureViolation(StructureError):
    pass


class ConfigurationError(Exception):
    pass


class RestrictedOperationException(Exception):
    def __init__(self, message, errors=()):
        super(RestrictedOperationException, self).__init__(message)
        self.message = message
        self.errors = list(errors)

    def get_message(self):
        o = [self.message]
        o.extend(self.errors)
        return "\n".join(o)
