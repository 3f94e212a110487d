"""
GraphQL SDL exported as a Python string named type_defs.
profile_api.routes binds the resolvers to it.
"""

type_defs = """
schema {
  query: Query
  mutation: Mutation
}

type Query {
  health: String!
  profile: User!
  users: [User!]!
  user(id: Int!): User
}

type User {
  id: Int!
  username: String!
  displayName: String
  email: String!
  createdAt: String!
  updatedAt: String!
}

type TokenResponse {
  accessToken: String!
  refreshToken: String!
  user: User!
}

input RegisterInput {
  username: String!
  displayName: String
  email: String!
  password: String!
}

input LoginInput {
  email: String!
  password: String!
}

input RefreshTokenInput {
  refreshToken: String!
}

input UpdateProfileInput {
  username: String
  displayName: String
  email: String
}

input CreateUserInput {
  username: String!
  displayName: String
  email: String!
  password: String!
}

input UpdateUserInput {
  username: String
  displayName: String
  email: String
  password: String
}

type Mutation {
  register(registerDto: RegisterInput!): TokenResponse!
  login(loginDto: LoginInput!): TokenResponse!
  refreshToken(refreshTokenDto: RefreshTokenInput!): TokenResponse!
  logout(refreshToken: String!): Boolean!
  updateProfile(updateUserDto: UpdateProfileInput!): User!
  deleteProfile: Boolean!

  createUser(createUserDto: CreateUserInput!): User!
  updateUser(id: Int!, updateUserDto: UpdateUserInput!): User!
  deleteUser(id: Int!): Boolean!
}
"""
