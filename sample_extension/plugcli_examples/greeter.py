""" Sample plugin
Exposes two commands in the "Greetings" category:
- `plugcli greet -n <name> [--shout]` prints a greeting
- `plugcli greet-count` tells how many greetings were printed
"""

from plugcli.options import OptionSpec
from plugcli.plugins.interface import Plugin


class Greeter(Plugin):
    "Greeting commands"

    name = "greeter"
    version = "1.0"
    category = "Greetings"
    greetings = 0

    def register_commands(self, registry):
        registry.set_category_description(self.category, "Say hello")
        options = OptionSpec().add("n", "name", "Who to greet", takes_value=True, required=True).add("s", "shout", "Use capitals")
        self.add_command(registry, "greet", options, "Print a greeting\nThe name is mandatory.", self.run_greet)
        self.add_command(registry, "greet-count", None, "Show the number of greetings", self.run_greet_count)

    def run_greet(self, parsed):
        "Print the greeting"
        text = f"Hello, {parsed.get('name')}!"
        print(text.upper() if parsed.has("shout") else text)
        self.greetings += 1
        self.log.info("Greeting count = %d", self.greetings)

    def run_greet_count(self, _parsed):
        "Show the number of greetings"
        print(f"{self.greetings} greeting(s)")


plugin = Greeter()
