from sprout.interfaces.cli.main import main

main()
