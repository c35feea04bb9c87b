# indigo_ai/core/errors.py


class IndigoAIError(Exception):
    """Base class for every failure the CLI reports to the operator."""


class ConfigError(IndigoAIError):
    """INDIGO_AUTH (or another setting) is missing or malformed."""


class NetworkError(IndigoAIError):
    """Transport failure talking to the Indigo API."""


class DecodeError(IndigoAIError):
    """The Indigo API returned JSON of an unexpected shape."""


class DeviceStateError(IndigoAIError):
    """A state change was rejected (anything but 2xx or the tolerated 401)."""


class TemplateError(IndigoAIError):
    """Prompt template missing or syntactically invalid."""


class CompletionError(IndigoAIError):
    """The chat-completion endpoint failed."""


class InterpretationError(IndigoAIError):
    """The model reply lacks the structure we asked for, even after repair."""
