from datetime import datetime

from flagtree import ControlSignal, TypeHandler, default_command
from flagtree.utils import setup_logging

setup_logging()

STAGES = {"dev", "staging", "prod"}


def list_releases(result):
    since: datetime | None = result.options.get("since")
    print(f"Releases for {result.options['stage']} since {since or 'the beginning'}")


def rollback(result):
    steps = result.args[0] if result.args else 1
    if result.options.get("dry_run"):
        print(f"Would roll back {steps} release(s)")
        return None
    print(f"Rolling back {steps} release(s)")
    return ControlSignal.terminate(0)


app = default_command("release", "Manage releases.", version="2.3.1")
app.add_type("stage", TypeHandler("stage", str.lower, lambda value: value.lower() in STAGES))
app.add_option(
    "-s, --stage <stage:stage>", "Target stage.", default="dev", inherited=True
)
app.add_option("-v, --verbose", "Verbose output.", inherited=True, collect=True)
app.add_env("RELEASE_TOKEN <token:string>", "Token used to publish releases.")

app.add_command("list", "List releases.")
app.get_command("list").add_alias("ls").add_option(
    "--since <since:date>", "Only list releases after this date."
).set_action(list_releases)

app.add_command("rollback [steps:integer]", "Roll back releases.")
app.get_command("rollback").add_option(
    "-n, --dry-run", "Print what would happen."
).set_action(rollback)
app.set_default("list")

if __name__ == "__main__":
    app.main()
