from whotfix.cli.app import main

main()
