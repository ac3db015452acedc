from flagtree import default_command
from flagtree.utils import setup_logging

setup_logging()


async def greet(result):
    name = result.args[0]
    greeting = "Hello" if not result.options.get("shout") else "HELLO"
    for _ in range(result.options["times"]):
        print(f"{greeting}, {name}!")


app = default_command("greet", "Print a greeting.", version="0.1.0")
app.add_option("-s, --shout", "Greet loudly.")
app.add_option("-t, --times <times:integer>", "How many greetings.", default=1)
app.add_arguments("<name:string>")
app.add_example("twice", "greet -t 2 World")
app.set_action(greet)

if __name__ == "__main__":
    app.main()
