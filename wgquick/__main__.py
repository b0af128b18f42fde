from wgquick.main import main

main()
