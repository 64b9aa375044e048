
class ButcherException(Exception):
    def __init__(self, msg):
        Exception.__init__(self, msg)
        self.message = msg


class NotFoundException(ButcherException):
    def __init__(self, entity_type, value):
        self.entity_type = entity_type
        self.value = value
        message = "Not found (%s:%s)" % (entity_type, str(value))
        super(NotFoundException, self).__init__(message)

########################################################################
##          Generation time errors
########################################################################

class GenerationError(ButcherException):
    """
    Base of all errors that abort generation.  These are attributed to the
    declaration and the field (or variant field) that caused them.
    """
    def __init__(self, msg, declaration = None, field = None):
        self.declaration = declaration
        self.field = field
        self.reason = msg
        super(GenerationError, self).__init__(self.attributed(msg))

    def attributed(self, msg):
        if self.declaration and self.field is not None:
            return "%s.%s: %s" % (self.declaration, self.field, msg)
        elif self.field is not None:
            return "Field '%s': %s" % (self.field, msg)
        elif self.declaration:
            return "%s: %s" % (self.declaration, msg)
        return msg

    def attribute(self, declaration = None, field = None):
        """
        Returns a copy of this error attributed to the given declaration and field.
        Attributions already present are kept.
        """
        return self.__class__(self.reason,
                              declaration = self.declaration or declaration,
                              field = self.field if self.field is not None else field)


class AnnotationSyntaxError(GenerationError):
    """ A malformed @butcher(...) annotation. """
    def __init__(self, msg, declaration = None, field = None, line = None, column = None):
        self.line = line
        self.column = column
        super(AnnotationSyntaxError, self).__init__(msg, declaration, field)

    def attributed(self, msg):
        out = super(AnnotationSyntaxError, self).attributed(msg)
        if self.line is not None:
            out = "Line %d:%d - %s" % (self.line, self.column, out)
        return out

    def attribute(self, declaration = None, field = None):
        return self.__class__(self.reason,
                              declaration = self.declaration or declaration,
                              field = self.field if self.field is not None else field,
                              line = self.line, column = self.column)


class UnknownStrategyError(GenerationError):
    def __init__(self, strategy, declaration = None, field = None):
        self.strategy = strategy
        super(UnknownStrategyError, self).__init__(strategy, declaration, field)

    def attributed(self, strategy):
        from butcher.generator.strategies import STRATEGY_TAGS
        msg = "Unknown strategy '%s', expected one of (%s)" % (strategy, ", ".join(STRATEGY_TAGS))
        return super(UnknownStrategyError, self).attributed(msg)


class UnsupportedTypeShapeError(GenerationError):
    def __init__(self, shape, declaration = None, field = None):
        self.shape = shape
        super(UnsupportedTypeShapeError, self).__init__(shape, declaration, field)

    def attributed(self, shape):
        msg = "Unsupported type shape: %s" % shape
        return super(UnsupportedTypeShapeError, self).attributed(msg)

########################################################################
##          Run time errors
########################################################################

class RuntimeCapabilityError(ButcherException):
    pass


class UnsatisfiedCapabilityError(RuntimeCapabilityError):
    def __init__(self, value, capability):
        self.value = value
        self.capability = capability
        message = "Value of type '%s' does not satisfy '%s'" % (type(value).__name__, capability)
        super(UnsatisfiedCapabilityError, self).__init__(message)


class BorrowExpiredError(RuntimeCapabilityError):
    def __init__(self, scope):
        self.scope = scope
        super(BorrowExpiredError, self).__init__("Borrow used after its scope (%s) was closed" % scope.name)
