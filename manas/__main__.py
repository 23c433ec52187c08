from manas.cli.main import main

main()
