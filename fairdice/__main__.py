from fairdice.cli import main

main()
