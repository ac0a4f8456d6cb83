from pyre_client import main

main()
