from fizzbuzz.main import run

run()
