# routers/assemblies.py
from fastapi import Depends

from deps.authz import require_admin
from generic_router import make_crud_router
from models import Assembly
from schemas import AssemblyCreate, AssemblyOut, AssemblyUpdate

router = make_crud_router(
    Assembly,
    prefix="assemblies",
    create_schema=AssemblyCreate,
    update_schema=AssemblyUpdate,
    out_schema=AssemblyOut,
    label="Assembly",
    list_order_by=(Assembly.created_at.desc(), Assembly.id.desc()),
    read_dependencies=[Depends(require_admin)],
    write_dependencies=[Depends(require_admin)],
)
