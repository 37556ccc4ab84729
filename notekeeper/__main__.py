from notekeeper.cli import main

main()
