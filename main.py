from bosun import *

registry = Registry()


@registry.register
class Greet(Command):
    name = "greet"
    descr = "Says hello"
    epilog = "Run without arguments to list every command."

    def initialize(self):
        self.add_argument("who", required=True, descr="who to greet")
        self.add_option("shout", short="s", type="boolean", descr="uppercase the greeting")
        self.add_option("times", short="t", type="integer", default=1, descr="how many greetings")

    def execute(self):
        message = "hello {who}"
        if self.options("shout"):
            message = message.upper()
        for _ in range(self.options("times")):
            self.success(message, {"who": self.arguments("who")})
        self.debug("greeted {who} {times} time(s)", {"who": self.arguments("who"), "times": self.options("times")})


@registry.register
class DbCreate(Command):
    name = "db:create"
    descr = "Creates a database"

    def initialize(self):
        self.add_argument("name", required=True, descr="the database name")
        self.add_option("connection", short="c", default="default", descr="connection to use")

    def execute(self):
        if self.arguments("name") in self.services:
            self.throw_error("Database exists", "database `%s` already exists" % self.arguments("name"))
        self.services.add(self.arguments("name"))
        self.info("created {name} on {connection}", {
            "name": self.arguments("name"),
            "connection": self.options("connection"),
        })


@registry.register
class DbSetup(Command):
    name = "db:setup"
    descr = "Creates the database and greets its owner"

    def initialize(self):
        self.add_argument("name", required=True, descr="the database name")

    def execute(self):
        self.run_command("db:create", {0: self.arguments("name")})
        self.run_command("greet", {0: "owner", "--shout": True})


if __name__ == '__main__':
    Dispatcher(registry, services=set(), title="bosun demo", script="main.py").main()
