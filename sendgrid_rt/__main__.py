import os
import sys


def main(argv=None):
    """Entry point for ``sendgrid-rt`` / ``python -m sendgrid_rt``."""
    from django.core.management import execute_from_command_line

    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "sendgrid_rt.settings")
    argv = sys.argv[1:] if argv is None else argv
    execute_from_command_line(["sendgrid-rt", "runrelay", *argv])


if __name__ == "__main__":
    main()
