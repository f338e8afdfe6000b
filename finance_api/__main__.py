from finance_api.main import run

run()
