"""Protocol layer: JSON envelopes, command builders, and reply parsing."""

from .messages import Method, WizMessage, WizResponse
from .commands import build_query
