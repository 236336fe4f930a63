from .cli.main import buildgate

if __name__ == "__main__":
    buildgate()
