from kibitzer.app import main

main()
