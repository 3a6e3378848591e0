from autofold.cli.main import main

main()
