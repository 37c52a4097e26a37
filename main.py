from rich.pretty import pprint

from switchboard import *

__prog__ = "switchboard-demo"

PERM_READ = 1 << 0
PERM_WRITE = 1 << 1
PERM_EXEC = 1 << 2

force, test, path, perms, num = Cell(False), Cell(False), Cell(None, type=str), Cell(0), Cell(0)


@boolean("--version", help="print the version and exit")
def version(parser, descriptor):
    print(__import__("switchboard").__version__)
    return Signal.STOP


parser = Parser(
    (
        Help(),
        version,
        Group("Basic options"),
        Boolean("-f", "--force", cell=force, help="force to do"),
        Boolean("-t", "--test", cell=test, help="test only"),
        String("-p", "--path", cell=path, help="path to read"),
        Integer("-n", "--num", cell=num, help="selected num"),
        Group("Bits options"),
        Bit("--read", cell=perms, data=PERM_READ, help="read perm"),
        Bit("--write", cell=perms, data=PERM_WRITE, help="write perm"),
        Bit("--exec", cell=perms, data=PERM_EXEC, help="exec perm"),
        End(),
    ),
    ("main.py [options] [[--] args]", "main.py [options]"),
    shell=True,
    colorful=True,
)
parser.describe(
    "A brief description of what the program does and how it works.",
    "Additional description of the program after the description of the arguments.",
)


if __name__ == '__main__':
    residual = parser.parse()
    pprint(parser)
    pprint({"force": force, "test": test, "path": path, "num": num, "perms": bin(perms.value)})
    pprint(residual)
