from fastapi import Request,HTTPException,status
from fastapi.security import HTTPBearer
from marketplace.auth.utils import decode_token


class Authentication(HTTPBearer):
    def __init__(self,auto_error=True):
        super().__init__(auto_error=auto_error)

    async def __call__(self, request:Request) -> dict:
        auth_creds=await super().__call__(request)
        if auth_creds is None:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED,detail="Missing bearer token.")
        token=auth_creds.credentials

        decoded_token=decode_token(token)

        if not decoded_token:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED,detail="Invalid or expired token provided.")

        return decoded_token
