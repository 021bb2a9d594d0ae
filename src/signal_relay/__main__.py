from signal_relay.cli import main

main()
