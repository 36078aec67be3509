from django.core.exceptions import ImproperlyConfigured
from django.core.management.base import BaseCommand, CommandError

from sendgrid_rt.conf import get_rt_endpoint, get_setting
from sendgrid_rt.rules import RuleTable, default_rule_from_config, rules_from_config


class Command(BaseCommand):
    help = "Print the effective routing table, default rule and RT endpoint."

    def handle(self, *args, **options):
        try:
            table = RuleTable.build(rules_from_config(get_setting("RULES")))
            default = default_rule_from_config(get_setting("DEFAULT"))
        except ImproperlyConfigured as exc:
            raise CommandError(f"Invalid relay configuration: {exc}") from exc

        self.stdout.write(f"RT endpoint: {get_rt_endpoint()}")
        self.stdout.write(
            f"Default: queue={default.queue} action={default.action}"
        )

        if not table:
            self.stdout.write("No address rules configured.")
            return

        self.stdout.write(f"{len(table)} address rule(s):")
        for address in sorted(table):
            rule = table[address]
            self.stdout.write(
                f"  {address} -> queue={rule.queue} action={rule.action}"
            )
