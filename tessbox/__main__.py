import fire

from tessbox.generator.run_generate import run


def main():
    """The main entry point for the command-line interface.

    This function serves as the entry point when the `tessbox` package is
    executed as a script. It uses the `fire` library to expose the `run`
    function from `tessbox.generator.run_generate` to the command line.
    """
    fire.Fire(run)


if __name__ == "__main__":
    main()
