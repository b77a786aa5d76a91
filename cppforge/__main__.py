from cppforge.cli import main

main()
