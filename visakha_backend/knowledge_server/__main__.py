from visakha_backend.knowledge_server.server import main

if __name__ == "__main__":
    main()
