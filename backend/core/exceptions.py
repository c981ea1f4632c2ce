"""Domain exceptions raised by service functions and translated to HTTP 400 by views"""


class BusinessRuleError(Exception):
    """A business rule rejected the requested operation"""

    def __init__(self, message, field=None):
        super().__init__(message)
        self.message = message
        self.field = field

    def as_response_data(self):
        data = {'error': self.message}
        if self.field:
            data['field'] = self.field
        return data
