import logging
from dataclasses import dataclass
from typing import Callable, Optional

from natives.common import bus
from natives.spec import BinaryIdentity, FileSystemAdapter, OriginRedirect

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildWarning:
    kind: str
    path: str
    message: str


class Materializer:
    """
    Copies a newly created identity's binary to its output path.

    A missing source is not an error: the identity stays valid and a warning
    is recorded. A failed copy is reported the same way.
    """

    def __init__(
        self,
        fs: FileSystemAdapter,
        origin_redirect: Optional[OriginRedirect] = None,
        on_warning: Optional[Callable[[BuildWarning], None]] = None,
    ):
        self.fs = fs
        self.origin_redirect = origin_redirect
        self.on_warning = on_warning

    def materialize(self, identity: BinaryIdentity) -> bool:
        source = identity.source_path

        if self.origin_redirect is not None:
            substitute = self.origin_redirect(source, self.fs.exists(source))
            if substitute:
                bus.debug("build.materialize.redirected", source=source, target=substitute)
                source = str(substitute)

        if not self.fs.exists(source):
            self._warn("missing_binary", "build.materialize.missing", source, name=identity.output_name)
            return False

        try:
            self.fs.copy_file(source, identity.output_path)
        except OSError as e:
            self._warn(
                "copy_failed",
                "build.materialize.failed",
                source,
                dest=identity.output_path,
                error=str(e),
            )
            return False
        bus.debug("build.materialize.copied", source=source, dest=identity.output_path)
        return True

    def _warn(self, kind: str, msg_id: str, path: str, **kwargs) -> None:
        warning = BuildWarning(
            kind=kind,
            path=path,
            message=bus.render_to_string(msg_id, path=path, **kwargs),
        )
        log.debug(warning.message)
        bus.warning(msg_id, path=path, **kwargs)
        if self.on_warning is not None:
            self.on_warning(warning)
