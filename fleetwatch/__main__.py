from fleetwatch.main import run

run()
