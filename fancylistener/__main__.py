from fancylistener.cli import main

main()
