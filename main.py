from rich.pretty import pprint

from declargs import *


@program(Schema(
    Argument("count", "-c", 1, required=True, reader=int, help="how many times to greet"),
    Argument("name", "-n", 1, default=lambda: "world", help="who to greet"),
    Argument("verbose", "-v", help="also print the schema\nbefore greeting"),
    descr="usage: main.py --count N [--name NAME] [-v]",
))
def callback(*rest, count, name, verbose):
    if verbose:
        pprint(callback.schema)
    for _ in range(count):
        print(f"hello, {name}!")


if __name__ == '__main__':
    raise SystemExit(invoke(callback))
