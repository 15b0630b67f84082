from wiki.main import run

run()
