from __future__ import annotations

from ..host import check_commands, install_hints
from ._common import _BaseCommand


class DoctorCLI(_BaseCommand):
    """Check host prerequisites and list missing required tools."""

    @classmethod
    def main(cls, argv=True, **kwargs):
        cls.cli(argv=argv, data=kwargs)
        missing, missing_opt = check_commands()
        if missing:
            print('❌ Missing required commands:', ', '.join(missing))
            hints = install_hints(missing)
            if hints:
                print('💡 On Debian/Ubuntu install:', ' '.join(hints))
            return 2
        if missing_opt:
            print('➖ Missing optional commands:', ', '.join(missing_opt))
        print('✅ Required host commands are present.')
        return 0
