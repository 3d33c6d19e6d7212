"""Project-specific exception types."""

from __future__ import annotations


class KVMTuneError(RuntimeError):
    """Base error for domain-level kvmtune failures."""


class ConfigurationError(KVMTuneError):
    """Raised when user input or the config file is missing or invalid."""


class QueryError(KVMTuneError):
    """Raised when libvirt cannot be queried or returns unparseable data."""

    def __init__(self, message: str, *, cmd: str = '', detail: str = ''):
        self.cmd = cmd
        self.detail = detail
        text = message
        if cmd:
            text += f'\ncommand: {cmd}'
        if detail:
            text += f'\noutput: {detail}'
        super().__init__(text)


class PreconditionError(KVMTuneError):
    """Raised when a safety check fails before any mutation."""

    def __init__(self, reason: str, message: str = ''):
        self.reason = reason
        super().__init__(f'{reason}: {message}' if message else reason)


# Fate of the temporary image when a disk pipeline fails.
ARTIFACT_NEVER_CREATED = 'never_created'
ARTIFACT_REMOVED = 'removed'
ARTIFACT_LEFT_BEHIND = 'left_behind'


class PipelineError(KVMTuneError):
    """Raised when one of the create/resize/replace steps fails.

    The message always says what happened to the temporary artifact so the
    operator knows whether manual cleanup is needed.
    """

    def __init__(
        self,
        stage: str,
        detail: str,
        *,
        artifact_path: str,
        artifact_state: str,
        cleanup_detail: str = '',
    ):
        self.stage = stage
        self.detail = detail
        self.artifact_path = artifact_path
        self.artifact_state = artifact_state
        self.cleanup_detail = cleanup_detail
        lines = [f'{stage} step failed: {detail}'.rstrip()]
        if artifact_state == ARTIFACT_NEVER_CREATED:
            lines.append(f'No new image was created at {artifact_path}.')
        elif artifact_state == ARTIFACT_REMOVED:
            lines.append(f'New image {artifact_path} was removed.')
        else:
            lines.append(
                f'Additionally, failed to remove new image {artifact_path}; '
                f'it was left behind and must be removed manually: '
                f'{cleanup_detail}'.rstrip()
            )
        super().__init__('\n'.join(lines))


class MutationError(KVMTuneError):
    """Raised when a maximum/current configuration call fails."""

    def __init__(self, step: str, message: str):
        self.step = step
        super().__init__(message)
