class BiliveToolsError(Exception):
    """Base class for errors raised by bilive_tools."""


class HookNotConfiguredError(BiliveToolsError):
    """An integration hook (captcha, send message) was called before the host assigned it."""

    def __init__(self, hook_name: str):
        super().__init__(f"hook '{hook_name}' is not configured")
        self.hook_name = hook_name
