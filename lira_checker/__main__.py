from lira_checker.server import main

main()
