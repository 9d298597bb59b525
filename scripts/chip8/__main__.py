from chip8.main import main


main()
