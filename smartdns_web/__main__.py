from smartdns_web.main import main

main()
