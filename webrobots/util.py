# encoding=utf-8
'''Miscellaneous functions.'''
import inspect


# https://docs.python.org/3/howto/logging-cookbook.html#use-of-alternative-formatting-styles
class BraceMessage:
    '''Log message formatted with :meth:`str.format` on demand.'''
    def __init__(self, fmt, *args, **kwargs):
        self.fmt = fmt
        self.args = args
        self.kwargs = kwargs

    def __str__(self):
        return self.fmt.format(*self.args, **self.kwargs)


async def resolve(value):
    '''Return the value, awaiting it first if it is awaitable.'''
    if inspect.isawaitable(value):
        return await value

    return value
