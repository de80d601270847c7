"""DDL for the store of record.

Printed by `boardsync schema` when the remote reports missing tables. Child
tables cascade on delete; the coordinator relies on that to remove groups and
tasks when their board is deleted remotely.
"""

SCHEMA_SQL = """\
create table if not exists public.boards (
    id text primary key,
    name text not null,
    description text not null default '',
    members jsonb not null default '[]'::jsonb,
    automations jsonb not null default '[]'::jsonb,
    created_at timestamptz not null default now()
);

create table if not exists public.task_groups (
    id text primary key,
    board_id text not null references public.boards (id) on delete cascade,
    name text not null,
    color text not null default '#D4AF37',
    created_at timestamptz not null default now()
);

create table if not exists public.tasks (
    id text primary key,
    group_id text not null references public.task_groups (id) on delete cascade,
    title text not null,
    description text not null default '',
    client_name text not null default '',
    client_phone text not null default '',
    client_avatar text not null default '',
    client_idea text not null default '',
    client_request text not null default '',
    value numeric check (value is null or value >= 0),
    status text not null check (status in ('PARADO', 'EM ANDAMENTO', 'CONCLUIDO')),
    priority text not null check (priority in ('Baixa', 'Média', 'Alta', 'Crítica')),
    owner_id text not null default '',
    start_date date,
    end_date date,
    comments jsonb not null default '[]'::jsonb,
    created_at timestamptz not null default now()
);

create table if not exists public.{profile_table} (
    id text primary key,
    name text not null default '',
    email text not null default '',
    avatar text not null default '',
    role text not null default 'MEMBER' check (role in ('ADMIN', 'MEMBER', 'GUEST')),
    updated_at timestamptz not null default now()
);
"""


def render_schema(profile_table: str = "profiles") -> str:
    return SCHEMA_SQL.replace("{profile_table}", profile_table)
