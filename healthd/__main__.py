from healthd.main import run

run()
