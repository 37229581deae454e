"""
Portfolio Backend — Services Layer
====================================

Service Inventory:
    - PasswordHasher:  salted one-way hashing (werkzeug)
    - TokenService:    HS256 bearer tokens (PyJWT)
    - AuthService:     login, change password, profile update
    - MediaStore:      abstract image store; CloudinaryMediaStore, LocalMediaStore
    - ImageValidator:  upload checks run before any media store call
    - PhotoService:    upload orchestration and photo repository
    - CategoryService: read-only category listing
    - bootstrap:       table creation and default rows

Services receive an AsyncSession per call and never import the engine.
"""
