from edgemax.cli.main import main

main()
