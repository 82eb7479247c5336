from auto_backport.cli import main

main()
