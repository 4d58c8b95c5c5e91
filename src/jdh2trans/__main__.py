from jdh2trans.cli import app

if __name__ == "__main__":
    app()
