"""
SocialNet Backend — Services Layer
====================================

What:  Business rules between the routes (HTTP) and the repositories (SQL).

Service Inventory:
    - UserService: registration, login, profiles, token verification, liked posts
    - PostService: posts, comments, likes, ownership checks
    - pagination:  limit/offset clamping shared by all list operations

Services never see a Request object; they take an AsyncSession and plain
values, raise the exceptions in `socialnet.exceptions`, and return the
response models in `socialnet.schemas`.
"""
